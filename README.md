# mcbots

A toolkit for headless Minecraft bots. It keeps a model of the loaded
world, simulates simple player physics, finds routes with A* and follows
them tick by tick, and builds and renders chat text components.

## What is inside

- `mcbots.node`: block positions (`Vec3`), movement kinds (`MoveType`),
  path nodes (`Node`) and search settings (`Options`, `default_options()`).
- `mcbots.world`: chunk storage and block queries (`World`,
  `classify_block`, `BlockType`, `ChunkColumn`, `ChunkSection`),
  including decoding of chunk data packet bodies with
  `World.load_chunk_packet`.
- `mcbots.astar`: `find_path`, `heuristic` and the errors
  `PathError`, `NoPathError`, `MaxIterationsError`, `TooFarError` and
  `UnloadedError`.
- `mcbots.movements`: `get_neighbors`, the moves a player can make from
  one block: walking, diagonals, jumps, drops, sprint-jumps, ladders and
  swimming.
- `mcbots.follower` and `mcbots.pathfinder`: `Follower` steers a bot
  along a found path; `Pathfinder` runs the search on a background thread
  and hands the result to a follower.
- `mcbots.physics`: `Physics` and `ControlState`, movement from the held
  controls, gravity, drag and simple collisions, ticked every 50 ms on a
  background thread once started.
- `mcbots.state`: `State`, the thread-safe position, rotation, velocity
  and vitals of the player.
- `mcbots.events`: `Events`, optional callbacks such as `on_spawn`,
  `on_chat`, `on_goal_reached` and `on_path_failed`.
- `mcbots.bot`: `Bot`, which ties state, world, physics and navigation
  together, and `offline_uuid(name)`, the UUID an offline-mode server
  gives a player name.
- `mcbots.chat`: chat components (`Message`, `ClickEvent`,
  `HoverEvent`, `ChatType`, `Decoration`) with JSON encoding and ANSI
  or plain-text rendering.
- `mcbots.config`: settings from the environment or a `.env` file, and
  logging setup.

## Finding a path

```python
from mcbots.astar import find_path, NoPathError
from mcbots.node import Vec3, default_options
from mcbots.world import World

world = World()
# ... fill the world with chunks, e.g. world.load_chunk_packet(data)

try:
    path = find_path(Vec3(0, 64, 0), Vec3(10, 64, 5), world, default_options())
except NoPathError:
    path = []

for node in path:
    print(node.pos, node.move)
```

`find_path` returns the nodes from start to goal, both included. It
raises `NoPathError` when the reachable area is exhausted and
`MaxIterationsError` when the search runs past `Options.max_iterations`.

## Driving a bot

```python
from mcbots.bot import Bot

bot = Bot("Steve")
bot.events.on_goal_reached = lambda: print("arrived")
bot.events.on_path_failed = lambda reason: print("failed:", reason)

bot.go_to(10, 64, 5, sprint=True)   # search runs on a background thread
bot.physics.start()                  # tick physics and navigation every 50 ms
...
bot.close()
```

A `Bot` writes outgoing packets to the `connection` it was given: any
object with a `send(packet, *fields)` method, where `packet` is a name
such as `"player_position"` or `"player_command"`. Without a connection
the packets are dropped. `close()` stops physics and calls the
connection's `close()` if it has one.

## Chat components

```python
from mcbots.chat import Message, set_language, text, translate_msg

greeting = text("Hello ").append(text("world").set_color("gold"))
print(greeting.clear_string())          # Hello world
print(greeting.to_json())

parsed = Message.from_json('{"text": "§aGreen", "bold": true}')
print(parsed.clear_string())            # Green

set_language({"greet": "Hi %s"})
print(translate_msg("greet", text("Alex")).clear_string())  # Hi Alex
```

`Message.clear_string()` strips `§` formatting codes; `str(message)`
renders them as ANSI escape sequences. Messages are immutable: `append`
and `set_color` return new ones. Translated messages are rendered with
the table set by `set_language`; until one is set, the table is empty
and translation keys render as nothing.

## Configuration

`load_config()` reads `PORT` (default `8080`) and `LOG_INFO` (`true`
turns on debug and info logging) from the environment, after loading a
`.env` file from the working directory if one exists; variables already
set win over the file. `setup_logger(config)` sends logging to standard
output at that level, warnings and errors only otherwise.

```python
from mcbots.config import load_config, setup_logger

config = load_config()
setup_logger(config)
```

## What it does not do

The package does not open a connection to a server: it has no network
code, no handshake or login, and no reading of incoming packets. The
caller supplies the connection object and feeds the world with chunk
data. There is no HTTP service, no pool for managing several bots and no
command-line program; `Config.port` is read but nothing here listens on
it.