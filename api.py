import asyncio
import uvicorn
from sqlmodel import SQLModel
from config import ApplicationConfig
from src.api.app import create_app
from src.depends import engine
import src.domain  # noqa: F401  registers the tables on SQLModel.metadata

app = create_app(ApplicationConfig)


async def create_tables():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


if __name__ == "__main__":
    asyncio.run(create_tables())
    uvicorn.run(
        "api:app",
        host=ApplicationConfig.API_HOST,
        port=ApplicationConfig.API_PORT,
        log_level=ApplicationConfig.LOG_LEVEL.lower(),
    )
