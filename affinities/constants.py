# AVATAR SIZES - scoring.py
MIN_SIZE = 80
MAX_SIZE = 160

DEFAULT_COUNT = 25

# Affinity v2 weights (each probability is scaled to 0..100)
W_FRIEND = 0.15
W_DM = 0.30
W_VC = 0.25
W_SERVER_MSG = 0.20
W_COMMUNICATION = 0.10

SCORE_MIN = 0.0
SCORE_MAX = 100.0

# CANVAS SIZER - layout.py
ASPECT_RATIO = 16 / 9
GRID_PADDING = 50
MIN_CANVAS_WIDTH = 1000
MIN_CANVAS_HEIGHT = 700

# DISK PACKER - layout.py
EDGE_PADDING = 10
TEXT_SPACE = 60          # caption band under each avatar, also kept free at the canvas bottom
MIN_DIST_FACTOR = 1.5
MAX_OUTER_TRIES = 30
CANDIDATES_PER_BASE = 30
UNIFORM_FALLBACK_TRIES = 100

# AVATARS - avatars.py
AVATAR_URL = "https://cdn.discordapp.com/avatars/{user_id}/{avatar}.webp?size={size}"
DEFAULT_AVATAR_URL = "https://cdn.discordapp.com/embed/avatars/{index}.png"
DEFAULT_AVATAR_COUNT = 5
AVATAR_CDN_SIZE = 256
AVATAR_TIMEOUT = 10
FETCH_WORKERS = 8

# RENDERING - render.py
BACKGROUND = (255, 255, 255, 255)
PLACEHOLDER_FILL = (200, 200, 200, 255)
RING_WIDTH = 3
RING_OFFSET = 1
HUE_SPAN = 300
RING_SATURATION = 0.8
RING_LIGHTNESS = 0.6
MASK_SUPERSAMPLE = 4

LABEL_FONT = "DejaVuSans.ttf"
LABEL_FONT_SIZE = 16
LABEL_COLOR = (30, 30, 30, 255)
SHARE_COLOR = (110, 110, 110, 255)
LABEL_GAP = 4
LABEL_MAX_CHARS = 18

OUTPUT_FILENAME = "affinities-cloud.png"

# SERVER - server.py
SAVE_DIR = "past_clouds"
NO_AFFINITIES_MESSAGE = (
    "You do not have any affinities, check your privacy settings "
    "(https://support.discord.com/hc/en-us/articles/21864805694999-Data-Used-to-Improve-Discord)."
)
