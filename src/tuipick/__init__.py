"""tuipick: an embeddable fuzzy finder for terminal applications."""

# Configuration
from tuipick.config import (
    OPTION_CASE_MATCHING,
    OPTION_MATCH_PATHS,
    OPTION_START_IN_SEARCH_MODE,
    PickerConfig,
    load_config,
)

# Entries
from tuipick.entries import Entry, EntryStore

# Events and responses
from tuipick.events import Cancel, Event, ExternalEvent, KeyEvent, Response, Select

# Fuzzy matching
from tuipick.fuzzy import CaseMatching, FuzzyMatch, Scorer, fuzzy_match

# Keybindings
from tuipick.keybindings import (
    DEFAULT_PICKER_KEYBINDINGS,
    PickerAction,
    PickerKeybindingsConfig,
    PickerKeybindingsManager,
    get_picker_keybindings,
    set_picker_keybindings,
)

# Keyboard input handling
from tuipick.keys import KeyId, matches_key

# The widget
from tuipick.picker import InputMode, Picker

# Ranking
from tuipick.ranking import MatchResult, rerank

# Rendering
from tuipick.render import DefaultPickerTheme, PickerTheme, PlainPickerTheme, clamp_scroll

# Utilities
from tuipick.utils import visible_width

__all__ = [
    # Configuration
    "OPTION_CASE_MATCHING",
    "OPTION_MATCH_PATHS",
    "OPTION_START_IN_SEARCH_MODE",
    "PickerConfig",
    "load_config",
    # Entries
    "Entry",
    "EntryStore",
    # Events and responses
    "Cancel",
    "Event",
    "ExternalEvent",
    "KeyEvent",
    "Response",
    "Select",
    # Fuzzy matching
    "CaseMatching",
    "FuzzyMatch",
    "Scorer",
    "fuzzy_match",
    # Keybindings
    "DEFAULT_PICKER_KEYBINDINGS",
    "PickerAction",
    "PickerKeybindingsConfig",
    "PickerKeybindingsManager",
    "get_picker_keybindings",
    "set_picker_keybindings",
    # Keyboard input handling
    "KeyId",
    "matches_key",
    # The widget
    "InputMode",
    "Picker",
    # Ranking
    "MatchResult",
    "rerank",
    # Rendering
    "DefaultPickerTheme",
    "PickerTheme",
    "PlainPickerTheme",
    "clamp_scroll",
    # Utilities
    "visible_width",
]
