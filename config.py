import os

# 기본 디렉토리 설정
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# 경로 설정
PRACTICES_DIR = os.path.abspath(os.getenv("PRACTICES_DIR", os.path.join(BASE_DIR, "practices")))
SESSION_DIR = os.path.abspath(os.getenv("SESSION_DIR", os.path.join(BASE_DIR, ".sessions")))
UI_SCRIPT = os.path.join(BASE_DIR, "saa_practice", "app.py")
LOG_FILE = os.path.join(BASE_DIR, "launch.log")

# 서버 설정
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "0"))   # 0 -> free port
UI_PORT = int(os.getenv("UI_PORT", "8501"))
APP_DOMAIN = os.getenv("APP_DOMAIN", "saa-practice.local")
API_URL = os.getenv("SAA_API_URL", "http://127.0.0.1:8000")
API_TIMEOUT = 10.0

# 시험 설정
EXAM_FILE = "S-practice-exam.md"
EXAM_DURATION_SECONDS = 130 * 60
PASSING_SCORE = 720
MAX_SCALED_SCORE = 1000
OPTION_LABELS = ("A", "B", "C", "D")

# 세션 저장 설정
SESSION_NAMESPACE = "saa_c03_exam_state_v1"
TICK_INTERVAL_SECONDS = 1.0
