import subprocess
import sys
import threading
from enum import Enum
from typing import Callable, List, Optional, Tuple


class OSFamily(Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    OTHER = "other"


def detect_os_family(platform_name: str = sys.platform) -> OSFamily:
    if platform_name.startswith(("win32", "cygwin")):
        return OSFamily.WINDOWS
    if platform_name == "darwin":
        return OSFamily.MACOS
    return OSFamily.OTHER


def browser_command(os_family: OSFamily, url: str) -> Tuple[str, List[str]]:
    """OS별 기본 브라우저 실행 명령어와 인자 (URL은 항상 마지막 인자)"""
    if os_family is OSFamily.WINDOWS:
        return "cmd", ["/c", "start", url]
    if os_family is OSFamily.MACOS:
        return "open", [url]
    return "xdg-open", [url]


def open_browser(
    url: str,
    os_family: Optional[OSFamily] = None,
    launcher: Callable[..., object] = subprocess.Popen,
) -> Optional[OSError]:
    """
    기본 브라우저로 url을 엽니다. 프로세스 종료를 기다리지 않습니다.

    Args:
        url: 열 주소
        os_family: 대상 OS (기본값: 현재 플랫폼)
        launcher: 명령 실행 함수 (기본값: subprocess.Popen)

    Returns:
        Optional[OSError]: 실행 자체가 실패한 경우 그 에러, 성공하면 None
    """
    command, args = browser_command(os_family or detect_os_family(), url)
    try:
        launcher([command, *args])
    except OSError as e:
        return e
    return None


def open_browser_async(url: str, **kwargs) -> threading.Thread:
    """open_browser를 데몬 스레드로 실행. 실행 실패 결과는 버림 (로그도 남기지 않음)"""
    thread = threading.Thread(
        target=open_browser, args=(url,), kwargs=kwargs, name="browser-launcher", daemon=True
    )
    thread.start()
    return thread
