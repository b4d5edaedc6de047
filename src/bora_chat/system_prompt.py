# The web client shipped an empty system message; keep that as the default.
DEFAULT_SYSTEM_PROMPT = ""


def build_system_prompt(custom_prompt: str | None = None) -> str:
    if custom_prompt is None:
        return DEFAULT_SYSTEM_PROMPT
    return custom_prompt.strip()
