import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    # 서버 바인딩 주소 ("" = 모든 인터페이스, IPv4/IPv6). 런타임에 변경하지 않음
    HOST = ""
    PORT = 8080

    # 정적 파일 루트 디렉토리
    DOCUMENT_ROOT = "app"

    # 브라우저 자동 실행 플래그
    OPEN_FLAG = "-o"
    BROWSER_URL = f"http://localhost:{PORT}/"

    LOG_DIR = os.getenv("LOG_DIR", "logs")
