import uvicorn

from .config import API_HOST, API_PORT

uvicorn.run("postboard.main:app", host=API_HOST, port=API_PORT)
