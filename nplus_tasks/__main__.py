"""Запуск Task Store на фиксированном порту: python -m nplus_tasks"""

import uvicorn

from .core.config import settings

if __name__ == "__main__":
    uvicorn.run("nplus_tasks.main:app", host="127.0.0.1", port=settings.PORT)
