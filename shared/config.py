import os
from pydantic import BaseModel, Field
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseModel):
    app_env: str = Field(default=os.getenv("APP_ENV", "dev"))
    log_level: str = Field(default=os.getenv("LOG_LEVEL", "INFO"))

    # Azure OpenAI
    az_endpoint: str = Field(default=os.getenv("AZURE_OPENAI_ENDPOINT", ""))
    az_api_key: str = Field(default=os.getenv("AZURE_OPENAI_API_KEY", ""))
    az_api_version: str = Field(default=os.getenv("AZURE_OPENAI_API_VERSION", "2024-10-21"))
    az_deployment: str = Field(default=os.getenv("AZURE_OPENAI_DEPLOYMENT", "gpt-4o"))
    az_model: str = Field(default=os.getenv("AZURE_OPENAI_MODEL", "gpt-4o"))

    # MCP
    mcp_server_path: str = Field(default=os.getenv("MCP_SERVER_PATH", "./mcp_server/server.py"))

    # Pipeline
    extraction_concurrency: int = Field(default=int(os.getenv("EXTRACTION_CONCURRENCY", "1")), ge=1)
    # 0 disables the budget and sends the whole corpus
    context_max_chars: int = Field(default=int(os.getenv("CONTEXT_MAX_CHARS", "400000")), ge=0)

    # LangSmith
    langsmith_api_key: str = Field(default=os.getenv("LANGSMITH_API_KEY", ""))
    langsmith_project: str = Field(default=os.getenv("LANGSMITH_PROJECT", "documind"))
    langsmith_tracing: bool = Field(default=os.getenv("LANGSMITH_TRACING", "0") == "1")

settings = Settings()
