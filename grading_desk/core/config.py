import os

# DEV ONLY: defaults are fine locally, override through the environment.
DATABASE_URL = os.getenv("GRADING_DESK_DATABASE_URL", "sqlite:///./grading_desk.db")
SIGNING_SECRET = os.getenv("GRADING_DESK_SIGNING_SECRET", "change-me-in-production")
STORAGE_BASE_URL = os.getenv("GRADING_DESK_STORAGE_URL", "https://storage.local/files")

# Signed file URLs
SIGNED_URL_EXPIRES_SECONDS = 3600

# Grade policy
SCORE_MIN = 0
SCORE_MAX = 100
EXTENDING_MIN = 90
PROFICIENT_MIN = 80
DEVELOPING_MIN = 65

# Paged document preview
ZOOM_MIN = 0.5
ZOOM_MAX = 3.0
ZOOM_STEP = 0.25
ZOOM_DEFAULT = 1.0
