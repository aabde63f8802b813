from typing import Callable, Optional, TypeVar

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from . import __version__
from .config import load_config
from .logging_utility import logger
from .management import (
    AuthError,
    ConnectError,
    InvalidArgument,
    ManagementError,
    ManagementSession,
    RemoteError,
    TimeoutError,
)


T = TypeVar("T")

app = FastAPI(title="OpenVPN Management", version=__version__)
config = load_config()


class SignalRequest(BaseModel):
    signal: str


class LevelRequest(BaseModel):
    level: int


class KillRequest(BaseModel):
    common_name: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None


def open_session() -> ManagementSession:
    """Open a session to the configured management endpoint."""
    return ManagementSession.open(
        host=config.host,
        port=config.port,
        timeout=config.timeout,
        password=config.password,
    )


def _call(action: str, operation: Callable[[ManagementSession], T]) -> T:
    """Run one operation on a fresh session and map failures to HTTP errors."""
    try:
        with open_session() as session:
            return operation(session)
    except InvalidArgument as e:
        logger.error(f"Invalid {action} request: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))
    except RemoteError as e:
        logger.error(f"Daemon rejected {action}: {e.message}")
        raise HTTPException(status_code=409, detail=e.message)
    except (ConnectError, AuthError, TimeoutError) as e:
        logger.error(f"Management interface unavailable for {action}: {str(e)}")
        raise HTTPException(status_code=503, detail=str(e))
    except ManagementError as e:
        logger.error(f"Error in {action}: {str(e)}")
        raise HTTPException(status_code=502, detail=str(e))


@app.get("/status")
def get_status():
    """Connected clients and routing table"""
    return _call("status", lambda session: session.status().as_dict())


@app.get("/stats")
def get_stats():
    """Client count and traffic counters"""
    return _call("stats", lambda session: session.stats().as_dict())


@app.get("/version")
def get_version():
    return {"result": _call("version", lambda session: session.version())}


@app.get("/pid")
def get_pid():
    return {"result": _call("pid", lambda session: session.pid())}


@app.post("/signal")
def send_signal(request: SignalRequest):
    """Send SIGHUP, SIGTERM, SIGUSR1 or SIGUSR2 to the daemon"""
    return {"result": _call("signal", lambda session: session.signal(request.signal))}


@app.get("/verb")
def get_verb():
    return {"result": _call("verb", lambda session: session.verb())}


@app.post("/verb")
def set_verb(request: LevelRequest):
    return {"result": _call("verb", lambda session: session.verb(request.level))}


@app.get("/mute")
def get_mute():
    return {"result": _call("mute", lambda session: session.mute())}


@app.post("/mute")
def set_mute(request: LevelRequest):
    return {"result": _call("mute", lambda session: session.mute(request.level))}


@app.post("/kill")
def kill_client(request: KillRequest):
    """Disconnect client(s) by common name or by real host and port"""
    return {
        "result": _call(
            "kill",
            lambda session: session.kill(
                common_name=request.common_name,
                host=request.host,
                port=request.port,
            ),
        )
    }
