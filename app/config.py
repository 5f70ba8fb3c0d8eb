import os

from dotenv import load_dotenv

load_dotenv()

APP_NAME = "AI Knowledge Assistant"
APP_VERSION = "1.0.0"

GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "")
LLM_MODEL = os.environ.get("LLM_MODEL", "gemini-2.5-flash")
ASK_MODEL = os.environ.get("ASK_MODEL", LLM_MODEL)
SUMMARY_MODEL = os.environ.get("SUMMARY_MODEL", LLM_MODEL)

# Text sent to the model and text echoed back to the browser are capped separately.
SUMMARY_INPUT_CHARS = int(os.environ.get("SUMMARY_INPUT_CHARS", "20000"))
PREVIEW_CHARS = int(os.environ.get("PREVIEW_CHARS", "100000"))

SUMMARY_MAX_OUTPUT_TOKENS = int(os.environ.get("SUMMARY_MAX_OUTPUT_TOKENS", "400"))
SUMMARY_TEMPERATURE = float(os.environ.get("SUMMARY_TEMPERATURE", "0.2"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
