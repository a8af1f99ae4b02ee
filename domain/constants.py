SPRITE_EXT = ".png"
META_EXT = ".meta"

DEFAULT_FOLDER = "Assets/"

# Preference keys (key-value store)
FOLDER_PATH_KEY = "target_folder_path"
PREFIX_FILTER_KEY = "prefix_filter"
POSTFIX_FILTER_KEY = "postfix_filter"
REGEX_FILTER_KEY = "regex_filter"
FILTER_MODE_KEY = "filter_mode"
BORDER_KEY = "border"
ALIGNMENT_KEY = "sprite_alignment"
CUSTOM_PIVOT_KEY = "custom_pivot"

DEFAULT_BORDER = (25.0, 25.0, 25.0, 25.0)
DEFAULT_CUSTOM_PIVOT = (0.0, 0.0)

# TextureImporter.spriteMode (0 = None, 2 = Multiple)
SPRITE_MODE_SINGLE = 1

# Display-only, never editable
PIVOT_UNIT_MODE = "Normalized"

SKIP_MISSING_META = "missing_meta"
SKIP_META_ERROR = "meta_error"
SKIP_NOT_SINGLE = "not_single_sprite"
SKIP_BORDER_TOO_LARGE = "border_exceeds_image"
SKIP_IMAGE_ERROR = "image_error"

RUN_CREATED = "CREATED"
RUN_SCANNED = "SCANNED"
RUN_COMPLETED = "COMPLETED"
RUN_FAILED = "FAILED"

ITEM_UPDATED = "UPDATED"
ITEM_SKIPPED = "SKIPPED"

PHASE_SCAN = "SCAN"
PHASE_FILTER = "FILTER"
PHASE_UPDATE = "UPDATE"
