import sys
from typing import List, Optional

from core.browser import open_browser_async
from core.static_server import create_app, run_server
from utils.config import Config
from utils.error_handler import ErrorHandler, ServerBindError
from utils.logger import setup_logger

logger = setup_logger('main')


def should_open_browser(argv: List[str]) -> bool:
    # 첫 번째 인자만 확인, 나머지 인자는 무시
    return len(argv) > 1 and argv[1] == Config.OPEN_FLAG


def main(argv: Optional[List[str]] = None) -> None:
    argv = sys.argv if argv is None else argv

    if should_open_browser(argv):
        open_browser_async(Config.BROWSER_URL)

    try:
        run_server(create_app(Config.DOCUMENT_ROOT), Config.HOST, Config.PORT)
    except ServerBindError as e:
        message = ErrorHandler.format_error_message(e)
        logger.error(message)
        print(message, file=sys.stderr)
        # 재시도 없이 종료 (종료 코드 0)
        return


if __name__ == "__main__":
    main()
