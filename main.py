import uvicorn

from cybershield.config import get_settings


def main():
    settings = get_settings()
    print(f"CyberShield backend listening on {settings.HOST}:{settings.PORT} (env: {settings.app_env})")
    uvicorn.run("cybershield.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
