# codevalley

The server-side foundation of Code Valley, a life-simulation game in which
players farm code, take on quests, trade items, befriend villagers and explore
a shared world. The package holds the game's data model as SQLAlchemy tables,
configuration read from the environment, database setup, and an ASGI
application with CORS, request logging, rate limiting and uniform JSON error
replies.

## Installing

```
pip install .
```

For running the tests as well:

```
pip install ".[test]"
pytest
```

The default database is MySQL, reached through SQLAlchemy's
`mysql+pymysql` dialect. That driver is not installed with the package; to
connect to MySQL, install it yourself:

```
pip install pymysql
```

Any other database SQLAlchemy supports, such as SQLite, can be used by
passing its URL instead (see below).

## Configuration

`codevalley.config.load(env_file)` builds a `Config` from the environment.
It first loads `env_file` (or `.env` in the working directory when `None`)
if that file exists; variables already set in the environment take
precedence over the file. An empty variable counts as unset. Every setting
has a default:

| Variable                | Default        | Meaning                                   |
|-------------------------|----------------|-------------------------------------------|
| `PORT`                  | `8000`         | port the server listens on                |
| `DB_HOST`               | `localhost`    | MySQL host                                |
| `DB_PORT`               | `3306`         | MySQL port                                |
| `DB_USER`               | `root`         | MySQL user                                |
| `DB_PASSWORD`           | *(empty)*      | MySQL password                            |
| `DB_NAME`               | `code_valley`  | database name                             |
| `JWT_SECRET`            | `secret`       | signing key kept for access tokens        |
| `JWT_EXPIRE_HOURS`      | `24`           | token lifetime in hours                   |
| `CORS_ORIGIN`           | `*`            | allowed origins, comma separated          |
| `RATE_LIMIT_MAX`        | `100`          | requests allowed per client per window    |
| `RATE_LIMIT_EXPIRATION` | `1`            | length of the rate-limit window, minutes  |
| `LOG_LEVEL`             | `info`         | log level                                 |

Integer settings that are not a plain decimal number read as `0`. A rate
limit of `0` or less falls back to 5 requests, and a window of `0` or less
falls back to one minute.

A minimal `.env` for local work:

```
DB_USER=user
DB_PASSWORD=password
JWT_SECRET=secret
```

## Running the server

```
codevalley
```

This loads the configuration, connects to the database, creates any missing
tables and serves the application with uvicorn on `0.0.0.0` at the configured
port. Options:

- `--env-file PATH` — file of environment variables instead of `.env`
- `--database-url URL` — database URL overriding the `DB_*` settings, e.g.
  `--database-url sqlite:///codevalley.db`

The command exits with status 1 if the database cannot be reached, the
tables cannot be created, or the server cannot start.

## Using it from Python

```python
from codevalley.config import load
from codevalley.database import initialize, auto_migrate, session_scope
from codevalley.app import create_app
from codevalley.models.user import User

config = load(None)
initialize(config, "sqlite:///codevalley.db")
auto_migrate()

with session_scope() as session:
    session.add(User(email="player@example.com", username="player", password_hash="placeholder"))

app = create_app(config)
```

- `database.build_database_url(config)` returns the MySQL URL for the
  configuration; `initialize(config, url)` connects (to `url` if given),
  checks the connection and raises `RuntimeError` on failure;
  `auto_migrate()` creates every table; `get_engine()` returns the current
  engine or `None`; `session_scope()` yields a session that commits on
  success and rolls back on error.
- `create_app(config)` returns a Starlette ASGI application, so any ASGI
  server can host it.
- `responses.success_response(message, data)` and
  `responses.error_response(message)` build the reply envelope; its
  `to_dict()` gives the JSON body.

Every reply has the same shape:

```json
{"success": true, "message": "…", "data": …}
```

Failures set `success` to `false` and `data` to `null`. Going over the rate
limit yields status 429 with the message `Rate limit exceeded` and a
`Retry-After` header; allowed replies carry `X-RateLimit-Limit`,
`X-RateLimit-Remaining` and `X-RateLimit-Reset`. An unknown path yields 404
with the message `Cannot <METHOD> <path>`, and an unhandled exception yields
500 with `Internal server error`.

## The game model

Model objects fill in their column defaults when constructed, so a new object
already has its identifier and default values; `to_dict()` gives its columns
as JSON-ready data (a user's password hash is left out, and
`User.to_response()` gives the public view). The tables live in:

- `codevalley.models.user` — users, friendships, online presence, user and
  daily statistics, daily rewards and login streaks
- `codevalley.models.quest` — quests and progress, daily tasks, story
  progress and code battles
- `codevalley.models.progression` — achievements, badges, skills and
  tutorials
- `codevalley.models.social` — guilds, members and invitations,
  notifications, events and participants
- `codevalley.models.economy` — inventory, shop items and purchases, the
  player marketplace, crafting and mini-games
- `codevalley.models.npc` — NPCs, relationships and interactions
- `codevalley.models.world` — maps, player and NPC positions, world objects,
  NPC schedules, the game clock and code farms

## What it does not do

The application has no game endpoints: there are no routes for registering,
logging in, profiles, quests, inventory, the shop, friends, notifications,
leaderboards or the world, and every path answers 404. Nothing issues or
checks access tokens; the JWT settings are only held in the configuration.
There is no WebSocket service and no running game clock. The tables can be
created and used through SQLAlchemy, but the game rules that would act on
them are not part of this package.