# policy_monitor/messages/score_messages.py

# ✅ Positive
SCORING_COMPLETED = "Documents scored against the topic model."
PREVIEW_LOADED = "Data preview loaded."
TOP_TOPICS_LOADED = "Top topics loaded."
GROUPS_LOADED = "Grouped topic scores loaded."
MODEL_INFO_LOADED = "Model info loaded."

# ❌ Errors
INVALID_FILE_TYPE = "Invalid file type. Only .csv and .xlsx files are allowed."
INVALID_FILE_FORMAT = "The uploaded file could not be read as a table."
EMPTY_FILE = "The uploaded file contains no rows."
MISSING_CONTENT_COLUMN = "Uploaded file must have a 'Content' column."
RESULT_NOT_FOUND = "Scoring result not found. Upload the file again."
SCORING_FAILED = "Scoring failed due to internal server error."
EXPORT_FAILED = "Failed to build the scored spreadsheet."
