import time
import asyncio
import pandas as pd
from typing import List, Tuple
from fastapi import UploadFile, File
from policy_monitor.core.config import settings
from policy_monitor.core.file_handler.base import DataFrameCodecBase
from policy_monitor.core.file_handler.codec import codec_for_filename
from policy_monitor.messages.score_messages import (
    EMPTY_FILE,
    INVALID_FILE_FORMAT,
    INVALID_FILE_TYPE,
    MISSING_CONTENT_COLUMN,
)
from policy_monitor.utils.exceptions import BadRequestError, PayloadTooLargeError
import logging

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE_MB = 20


def max_file_size_mb() -> int:
    return settings.MAX_SIZE_FILE_UPLOAD or DEFAULT_MAX_FILE_SIZE_MB


def validate_extension(file: UploadFile) -> DataFrameCodecBase:
    # browsers disagree on the content type of .csv, so trust the extension
    codec = codec_for_filename(file.filename)
    if codec is None:
        raise BadRequestError(code="INVALID_FILE_TYPE", message=INVALID_FILE_TYPE)
    return codec


async def validate_file_size(file: UploadFile) -> bytes:
    contents = await file.read()
    limit = max_file_size_mb()
    if len(contents) > limit * 1024 * 1024:
        raise PayloadTooLargeError(
            code="FILE_TOO_LARGE",
            message=f"File is too large. Max allowed size is {limit}MB.",
        )
    return contents


async def parse_table(contents: bytes, codec: DataFrameCodecBase) -> pd.DataFrame:
    try:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, codec.from_bytes, contents)
    except pd.errors.EmptyDataError:
        raise BadRequestError(code="EMPTY_FILE", message=EMPTY_FILE)
    except Exception as e:
        logger.warning(f"⚠️ Could not parse upload: {e}")
        raise BadRequestError(code="INVALID_FILE_FORMAT", message=INVALID_FILE_FORMAT)


def validate_required_columns(
    df: pd.DataFrame, required_columns: List[str]
) -> pd.DataFrame:
    missing = [col for col in required_columns if col not in df.columns]
    if missing:
        raise BadRequestError(
            code="MISSING_CONTENT_COLUMN",
            message=MISSING_CONTENT_COLUMN
            if missing == ["Content"]
            else f"Missing required columns: {', '.join(missing)}",
        )
    if df.empty:
        raise BadRequestError(code="EMPTY_FILE", message=EMPTY_FILE)
    return df


def validate_upload(required_columns: List[str] = ["Content"]):
    async def dependency(
        file: UploadFile = File(...),
    ) -> Tuple[bytes, pd.DataFrame]:
        start = time.time()

        codec = validate_extension(file)
        contents = await validate_file_size(file)
        df = await parse_table(contents, codec)
        df = validate_required_columns(df, required_columns)

        logger.info(
            f"✅ Validated upload '{file.filename}' ({len(df)} rows) "
            f"in {time.time() - start:.2f}s"
        )
        return contents, df

    return dependency
