"""
Planotto - Provider call logger.

Logs provider requests and responses to files for debugging.
Enabled via PLANOTTO_LOG_PROVIDER_CALLS=1 or the --log-calls CLI flag.

Image data URLs are replaced by a short placeholder before writing.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any

# Configuration
LOG_CALLS = os.getenv("PLANOTTO_LOG_PROVIDER_CALLS", "0") == "1"
LOG_DIR = Path("provider_logs")
MAX_LOGGED_STRING = 20000

# Session tracking
_session_id: str | None = None
_call_counter: int = 0


def enable_call_logging(enabled: bool = True) -> None:
    """Enable or disable provider call logging."""
    global LOG_CALLS
    LOG_CALLS = enabled
    if enabled:
        _ensure_log_dir()


def _ensure_log_dir() -> None:
    LOG_DIR.mkdir(exist_ok=True)


def _get_session_id() -> str:
    global _session_id
    if _session_id is None:
        _session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    return _session_id


def _get_session_dir() -> Path:
    session_dir = LOG_DIR / _get_session_id()
    session_dir.mkdir(exist_ok=True)
    return session_dir


def _redact(value: Any) -> Any:
    """Replace inline images and base64 blobs with their size so logs stay readable."""
    if isinstance(value, str) and (value.startswith("data:image/") or len(value) > MAX_LOGGED_STRING):
        return f"<{len(value)} chars omitted>"
    if isinstance(value, list):
        return [_redact(item) for item in value]
    if isinstance(value, dict):
        return {key: _redact(item) for key, item in value.items()}
    return value


def log_provider_call(
    *,
    provider: str,
    operation: str,
    request: Any = None,
    response: Any = None,
    status: int | None = None,
    error: str | None = None,
) -> Path | None:
    """
    Log a provider call to a markdown file.

    Args:
        provider: Provider name (openrouter, fal, fusionbrain)
        operation: What was called (chat, ocr_submit, ocr_poll, ...)
        request: Request body or prompt parts
        response: Parsed response body (optional)
        status: HTTP status code, when there was one
        error: Diagnostic text for failed calls (optional)

    Returns:
        Path to the log file, or None if logging is disabled
    """
    if not LOG_CALLS:
        return None

    global _call_counter
    _call_counter += 1

    _ensure_log_dir()
    filepath = _get_session_dir() / f"{_call_counter:02d}_{provider}_{operation}.md"

    status_str = f"\n**Status:** {status}" if status is not None else ""
    content = f"""# Provider Call: {provider} / {operation}

**Time:** {datetime.now().isoformat()}{status_str}

---

## Request

```json
{json.dumps(_redact(request), indent=2, ensure_ascii=False, default=str)}
```

---

## Response

"""

    if error:
        content += f"**ERROR:** {error}\n"
    elif response is not None:
        content += (
            f"```json\n{json.dumps(_redact(response), indent=2, ensure_ascii=False, default=str)}\n```\n"
        )
    else:
        content += "(No response body)\n"

    filepath.write_text(content, encoding="utf-8")
    return filepath


def get_session_log_dir() -> Path | None:
    """Get the current session's log directory, if logging is enabled."""
    if not LOG_CALLS:
        return None
    return _get_session_dir()


def reset_session() -> None:
    """Reset the session (for testing)."""
    global _session_id, _call_counter
    _session_id = None
    _call_counter = 0
