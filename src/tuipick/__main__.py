from tuipick.cli import main

main()
