"""Request logging middleware."""

from __future__ import annotations

import os
import sys
import threading
import time
from typing import TextIO

from arry.radix import Handler
from arry.router import Middleware


def logger() -> Middleware:
    """Log requests to standard output."""
    return logger_to_writer(sys.stdout)


def logger_to_file(file: str) -> Middleware:
    """Log requests to ``file``, creating its directory and appending to it."""
    directory = os.path.dirname(file)
    if directory:
        os.makedirs(directory, mode=0o755, exist_ok=True)
    out = open(file, "a", encoding="utf-8")
    return logger_to_writer(out)


def logger_to_writer(out: TextIO) -> Middleware:
    """Log each request and its outcome to ``out``."""
    lock = threading.Lock()

    def emit(message: str) -> None:
        stamp = time.strftime("%Y/%m/%d %H:%M:%S")
        with lock:
            out.write(f"{stamp} {message}\n")

    def middleware(next_handler: Handler) -> Handler:
        def handler(ctx) -> None:
            start = time.perf_counter()
            req = ctx.request
            user_agent = req.headers.get("User-Agent")
            emit(f"{req.remote_addr}|{req.method}|{req.path}|{user_agent}")

            next_handler(ctx)

            micros = int((time.perf_counter() - start) * 1_000_000)
            emit(f"{ctx.response.code}|{req.path}|{micros}μs")
            flush = getattr(out, "flush", None)
            if callable(flush):
                flush()

        return handler

    return middleware