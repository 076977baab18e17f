from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Application Settings
    PROJECT_NAME: str = "Room Signaling Relay"
    DEBUG: bool = True

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # API Settings
    API_V1_STR: str = "/api/v1"

    # Room a join lands in when the client sends no (or an empty) roomId
    DEFAULT_ROOM: str = "lobby"

    # Static assets served at "/" when the directory exists
    PUBLIC_DIR: str = "public"

    # Comma-separated list of allowed origins for the HTTP API
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    LOG_LEVEL: str = "INFO"
    # Optional file target; rotated daily when set
    LOG_FILE: str | None = None

    # TLS is enabled only when both are provided
    SSL_CERTFILE: str | None = None
    SSL_KEYFILE: str | None = None

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def tls_enabled(self) -> bool:
        return bool(self.SSL_CERTFILE and self.SSL_KEYFILE)

    def _post_init(self):
        if not self.DEFAULT_ROOM.strip():
            raise ValueError("DEFAULT_ROOM must not be blank")
        # TLS needs both files or neither
        if bool(self.SSL_CERTFILE) != bool(self.SSL_KEYFILE):
            raise ValueError("SSL_CERTFILE and SSL_KEYFILE must be set together")

settings = Settings()
settings._post_init()
