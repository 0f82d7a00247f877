from fastapi import FastAPI, Request

from private_notes.api import auth, deps, notes
from private_notes.logging_config import configure_logging

configure_logging(deps.settings.log_level, deps.settings.log_file)

# note responses are per user and per session; nothing may cache them
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, must-revalidate, max-age=0, no-store, private",
    "Pragma": "no-cache",
    "Expires": "Wed, 11 Jan 1984 05:00:00 GMT",
    "Surrogate-Control": "no-store",
}

app = FastAPI(title="Private Student Notes API")
app.include_router(auth.router)
app.include_router(notes.router)


@app.middleware("http")
async def no_cache_for_notes(request: Request, call_next):
    response = await call_next(request)
    if request.url.path.startswith(notes.NAMESPACE + "/"):
        for name, value in NO_CACHE_HEADERS.items():
            response.headers[name] = value
        if "last-modified" in response.headers:
            del response.headers["last-modified"]
    return response


@app.get("/health")
def health():
    return {"ok": True}
