# arry

A small web framework for WSGI: a radix-tree router with static, parameter
and catch-all routes, composable middlewares, and template engines for HTML,
plain text, JSON and XML.

## A first application

```python
from arry.app import Arry
from arry.middlewares.compression import gzip
from arry.middlewares.logger import logger
from arry.middlewares.recovery import panic

app = Arry()
app.use(gzip)
app.use(logger())
app.use(panic)

app.static("/static", "assets")
app.views("assets/")

router = app.router()


def index(ctx):
    ctx.text(200, "index")


def hello(ctx):
    ctx.text(200, f"Hello {ctx.param('name')}")


def user(ctx):
    ctx.json(200, {"name": "Jim", "age": 26})


router.get("/", index)
router.get("/hello/:name", hello)
router.get("/json", user)
```

`app.views(directory)` loads every `*.html` file in the directory up front
and raises `FileNotFoundError` when there is none. `app.static(url, directory)`
serves files from `directory`, taken relative to the working directory, under
`url/*`.

`Arry` is a WSGI application, so any WSGI server can host it:

```python
from wsgiref.simple_server import make_server

with make_server("127.0.0.1", 8087, app) as server:
    server.serve_forever()
```

or let it listen by itself with `app.start(":8087")`, which blocks and serves
each request in its own thread. When called from the main thread with
`app.graceful` left at `True`, Ctrl-C or SIGTERM stops it cleanly. From
another thread, `app.shutdown()` or `app.close()` stops the loop and closes
the socket; both raise `RuntimeError` if the server was never started.

Handlers can also be called without a server, which is handy in tests:

```python
from arry.request import make_request
from arry.response import ResponseRecorder

recorder = ResponseRecorder()
app.serve_http(recorder, make_request("GET", "/hello/jim"))
assert recorder.code == 200
assert recorder.text() == "Hello jim"
```

## Routing

Routes are registered per method with `get`, `post`, `put`, `delete`,
`patch`, `options` and `head`; `any` registers all of them and `match`
a chosen list:

```python
router.match(["GET", "POST"], "/webhook", handler)
router.any("/health", handler)
```

Patterns may hold `:name` parameters and a trailing `*` catch-all, read back
with `ctx.param("name")` and `ctx.param("*")`. When several routes could
match, static segments win over parameters, and parameters over catch-alls.
A request whose path or method matches no route gets a 404 reply.

Routers can be built separately and grafted under a prefix. Middlewares given
to `Router(...)`, or added with `use`, wrap the routes registered after them;
a parent's middlewares run before those of a grafted child:

```python
from arry.router import Router

users = Router()
users.get("/list", list_users)

api = Router()
api.graft("/users", users)

app.router().graft("/api", api)
```

Middlewares added with `app.use` wrap every request, matched or not.

## The context

Each handler receives a `Context` with helpers for the request — `query`,
`query_default`, `query_int`, `query_params`, `header`, `cookie`, `cookies`,
`body`, `decode`, `bind`, `client_ip` — and for the reply — `text`, `json`,
`json_error`, `json_blob`, `blob`, `file`, `render`, `redirect`, `push`,
`stream`, `attachment`, `status`, `set_header`, `set_cookie` and `reply`,
which answers with the standard status text, as JSON when the client sends
`Accept: application/json`. Values can be passed between middlewares with
`set` and `get`.

- `body()` reads the request body once and caches it, so `decode()` can
  follow it.
- `decode()` parses the body as JSON and raises `ValueError` on bad input.
- `bind()` returns the decoded JSON, or for url-encoded and multipart
  requests the parsed form values as a dict of lists.
- `client_ip()` prefers `X-Forwarded-For`, then `X-Real-IP`, then the
  remote address.
- `render()` raises `RuntimeError` when no engine is set.
- `push(url)` adds a `Link: <url>; rel=preload` header.

## Middlewares

- `arry.middlewares.compression.gzip` compresses the response body and fills
  in a missing `Content-Type` by sniffing the first bytes.
- `arry.middlewares.logger.logger()`, `logger_to_file(path)` and
  `logger_to_writer(stream)` log each request and its status and duration.
- `arry.middlewares.recovery.panic` turns an exception into a 500 reply;
  `panic_with_handler(handler)` logs it and lets `handler(ctx, exc)` produce
  the reply.
- `arry.middlewares.cors.cors()` and `cors_with_config(CORSConfig(...))` add
  CORS headers for allowed origins and answer `OPTIONS` preflights with 204.
- `arry.middlewares.auth.auth(token, methods)` compares the `Authorization`
  header with a token, records the result for `ctx.is_authed()`, and refuses
  the listed methods with a 403 JSON error when it does not match:

```python
from arry.middlewares.auth import auth

app.use(auth("Bearer token", ["POST", "PUT", "DELETE"]))
```

## Template engines

`app.views(directory)` installs an HTML engine over the templates in a
directory; `ctx.render(200, "page.html", data)` renders one of them. HTML and
plain text templates use Jinja2 syntax; a mapping passed as data supplies the
template variables, and the data itself is also available as `data`.

Other engines come from `arry.engine`:

```python
from arry.engine import EngineConfig, EngineType, new_engine, new_engine_with_config

html = new_engine("templates", "html")
api = new_engine_with_config(EngineConfig(kind=EngineType.JSON))
```

`new_engine_with_config` picks an HTML, plain text, JSON or XML engine from
the config's `kind`, or from its `extension` when no kind is given, and
defaults to HTML. A YAML kind gives a plain text engine. HTML and plain text
engines (`arry.engines.html_engine.HTMLEngine`,
`arry.engines.plain_engine.PlainEngine`) can cache parsed templates and have
`clear_cache()`. `JSONEngine` writes the data as indented JSON; `XMLEngine`
writes a dataclass instance or an `xml.etree.ElementTree.Element` after an
XML declaration.

## What it does not do

- `app.start` serves plain HTTP only; there is no HTTPS listener and no
  automatic certificate handling. Put a TLS-terminating proxy in front, or
  host the WSGI application in a server that does TLS.
- There is no HTTP/2 server push; `ctx.push` only adds a preload `Link`
  header unless the writer itself offers a `push` method.
- `bind()` does not fill objects from form fields; it returns the raw form
  values.
- There is no command-line program; the package is used as a library.