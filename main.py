# main.py

from storefront.main import app
from storefront.core.config import settings

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
