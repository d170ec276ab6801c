from starlette.requests import Request

FLASH_KEY = "flash"


def set_flash(request: Request, notice: str | None = None, error: str | None = None) -> None:
    messages = {}
    if notice:
        messages["notice"] = notice
    if error:
        messages["error"] = error
    if messages:
        request.session[FLASH_KEY] = messages


def pop_flash(request: Request) -> dict:
    # shown once, on the next page render
    return request.session.pop(FLASH_KEY, None) or {}
