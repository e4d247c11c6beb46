"""
Centralized constants for MathSnap.
All magic numbers used by the rendering pipeline live here.
"""

# ===========================================
# STYLE DEFAULTS
# ===========================================
DEFAULT_FONT_FAMILY = (
    '"Latin Modern Math", KaTeX_Main, KaTeX_Math, "STIX Two Math", '
    'STIXGeneral, "Cambria Math", serif'
)
DEFAULT_FONT_SIZE = 18                # px
DEFAULT_COLOR = '#000000'
DEFAULT_BACKGROUND = 'transparent'
DEFAULT_PADDING = 1                   # px around the formula
DEFAULT_SCALE = 2                     # device pixel ratio

MIN_FONT_SIZE = 1
MAX_FONT_SIZE = 512
MAX_PADDING = 256
MAX_SCALE = 8

GENERIC_FONT_FAMILIES = (
    'serif', 'sans-serif', 'monospace', 'cursive', 'fantasy', 'system-ui',
)

# Per-profile overrides of the defaults above
STYLE_PROFILES = {
    'default': {'font_size': DEFAULT_FONT_SIZE, 'padding': DEFAULT_PADDING},
    'document': {'font_size': 20, 'padding': 6},
}

# ===========================================
# RENDERING
# ===========================================
RENDER_CONTAINER_SELECTOR = '.wrap'
INLINE_FORMULA_CLASS = 'formula-inline'
BLOCK_FORMULA_CLASS = 'formula-block'
IMAGE_EXTENSION = '.png'

VIEWPORT_WIDTH = 800
VIEWPORT_HEIGHT = 600
PAGE_LOAD_TIMEOUT_MS = 5000
RENDERER_TIMEOUT_SECONDS = 10
BROWSER_ARGS = ['--no-sandbox', '--disable-setuid-sandbox']

# ===========================================
# API / SERVER
# ===========================================
API_RATE_LIMIT = '60/minute'
MAX_REQUEST_BYTES = 2 * 1024 * 1024   # 2 MB JSON body
NO_CACHE_HEADERS = {
    'Cache-Control': 'no-store, no-cache, must-revalidate, proxy-revalidate',
    'Pragma': 'no-cache',
    'Expires': '0',
    'Surrogate-Control': 'no-store',
}

# ===========================================
# LOGGING
# ===========================================
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE = 'logs/mathsnap.log'
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 5
