"""
main.py — SAA 연습 시험 진입점

API 서버(uvicorn)를 백그라운드 스레드로 띄우고, Streamlit UI를 하위 프로세스로 실행한다.
"""

import logging
import os
import socket
import subprocess
import sys
import threading
import time
import traceback
import webbrowser

# ── 패키지 경로 설정 (반드시 최상단) ──────────────────────────────────────────
_BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if _BASE_DIR not in sys.path:
    sys.path.insert(0, _BASE_DIR)

from config import APP_DOMAIN, BASE_DIR, DEFAULT_HOST, DEFAULT_PORT, LOG_FILE, UI_PORT, UI_SCRIPT

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    try:
        handlers = [
            logging.FileHandler(LOG_FILE, encoding="utf-8"),
            logging.StreamHandler(sys.stdout),
        ]
    except PermissionError:
        # launch.log를 열 수 없으면 콘솔만 사용
        handlers = [logging.StreamHandler(sys.stdout)]
    logging.basicConfig(level=level, format=_LOG_FORMAT, handlers=handlers)


# ── 네트워크 유틸 ────────────────────────────────────────────────────────────

def _pick_port(preferred: int) -> int:
    if preferred:
        return preferred
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((DEFAULT_HOST, 0))
        return sock.getsockname()[1]


def _port_ready(port: int, timeout: float) -> bool:
    """timeout초 안에 DEFAULT_HOST:port로 접속되면 True."""
    give_up_at = time.time() + timeout
    while time.time() < give_up_at:
        try:
            with socket.create_connection((DEFAULT_HOST, port), timeout=0.5):
                return True
        except OSError:
            time.sleep(0.1)
    return False


# ── 프로세스 기동 ────────────────────────────────────────────────────────────

def _serve_api(port: int) -> None:
    try:
        import uvicorn
        from api.app import create_app

        logger.info(f"API 서버 시작: {DEFAULT_HOST}:{port}")
        uvicorn.run(create_app(), host=DEFAULT_HOST, port=port, log_level="warning")
    except Exception:
        logger.error(f"API 서버 오류:\n{traceback.format_exc()}")


def _launch_ui(api_port: int) -> subprocess.Popen:
    env = dict(os.environ, SAA_API_URL=f"http://{DEFAULT_HOST}:{api_port}")
    logger.info(f"Streamlit UI 실행: port {UI_PORT}")
    return subprocess.Popen(
        [
            sys.executable, "-m", "streamlit", "run", UI_SCRIPT,
            "--server.port", str(UI_PORT),
            "--server.headless", "true",
        ],
        env=env,
        cwd=BASE_DIR,
    )


def main() -> int:
    configure_logging()
    logger.info("=== SAA Practice Exam ===")
    os.chdir(BASE_DIR)

    api_port = _pick_port(DEFAULT_PORT)
    threading.Thread(target=_serve_api, args=(api_port,), name="api-server", daemon=True).start()
    if not _port_ready(api_port, timeout=15.0):
        logger.error(f"API 서버가 {api_port} 포트에서 응답하지 않습니다. 포트를 점유한 프로세스를 확인하세요.")
        return 1

    ui = _launch_ui(api_port)
    try:
        if _port_ready(UI_PORT, timeout=30.0):
            logger.info(f"UI 준비 완료: http://{APP_DOMAIN}:{UI_PORT} (local: http://localhost:{UI_PORT})")
            webbrowser.open(f"http://localhost:{UI_PORT}")
        return ui.wait()
    except KeyboardInterrupt:
        logger.info("사용자에 의해 종료되었습니다.")
        return 0
    finally:
        ui.terminate()


if __name__ == "__main__":
    sys.exit(main())
