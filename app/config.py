from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    port: int = 3000
    cors_origins: str = "*"

    # Anthropic (key arrives with each request)
    llm_model: str = "claude-sonnet-4-20250514"
    planner_max_tokens: int = 1024
    rewrite_max_tokens: int = 16000

    # Query planning
    planner_sample_chars: int = 4000
    max_search_queries: int = 8

    # Brave search (key arrives with each request)
    brave_search_url: str = "https://api.search.brave.com/res/v1/web/search"
    search_result_count: int = 5
    search_top_results: int = 3
    search_timeout_seconds: float = 10.0
    search_delay_seconds: float = 0.5

    # Rewriting
    rewrite_chunk_threshold: int = 20000
    chunk_digest_max_chars: int = 8000
    chunk_delay_seconds: float = 1.0

    # Wall-clock budget
    pipeline_budget_seconds: float = 240.0
    research_budget_seconds: float = 90.0
    # Per-call LLM timeout is the time left, but never below this floor
    llm_min_timeout_seconds: float = 5.0

    # Webflow CMS proxy
    webflow_api_base: str = "https://api.webflow.com/v2"
    webflow_timeout_seconds: float = 30.0

    # App
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_to_file: bool = True
    log_dir: str = "logs"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
