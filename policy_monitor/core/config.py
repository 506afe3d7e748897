# policy_monitor/core/config.py

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    ENV: str = "local"

    # Lexical resources shipped with the service
    DATA_DIR: Path = PACKAGE_DIR / "data"
    USER_DICT_FILE: str = "add_word.txt"
    STOPWORDS_FILE: str = "cn_stopwords.txt"
    SINGLE_CHAR_FILE: str = "stm_single_vocab_removed.txt"
    CITY_LIST_FILE: str = "city_list.txt"
    TOPIC_LABELS_FILE: str = "topic_labels.csv"
    TOPIC_GROUPS_FILE: str = "topic_groups.csv"

    # Pre-trained STM artifact (downloaded once on first start)
    MODEL_DIR: Path = Path("models")
    MODEL_FILENAME: str = "tm_2.stm_auto.RData"
    MODEL_URL: str = (
        "https://github.com/chrisxu220-code/china-policy-monitor/releases/download/"
        "v1.0/tm_2.stm_auto.medium.version4.-2.RData"
    )
    MODEL_DOWNLOAD_TIMEOUT: int = 300
    NUM_TOPICS: int = 74

    # Presentation
    TOP_N_TOPICS: int = 10
    PREVIEW_ROWS: int = 5

    MAX_SIZE_FILE_UPLOAD: int | None = None  # MB
    RESULT_CACHE_SIZE: int = 32
    UPLOAD_RATE_LIMIT: str = "30/minute"

    FRONTEND_ORIGIN: str | None = None

    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
    )

    @property
    def MODEL_PATH(self) -> Path:
        return Path(self.MODEL_DIR) / self.MODEL_FILENAME


settings = Settings()
