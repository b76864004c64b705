from flask import Flask, request, jsonify
import os
import re
import uuid
import logging
from datetime import datetime

from maze_router import ErrorKind, MazeError, RouteFinder, parse_maze
from maze_router.persistence import load_route_file, save_route

app = Flask(__name__)
logger = logging.getLogger("maze_router.app")

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.environ.get('MAZE_ROUTER_DATA_DIR') or os.path.join(BASE_DIR, 'data')
SAVES_DIR = os.path.join(DATA_DIR, 'routes')

app.config.setdefault('SAVES_DIR', SAVES_DIR)

# Simple in-memory store of active routes; saved copies live in SAVES_DIR
ROUTES = {}


def saves_dir() -> str:
    path = app.config['SAVES_DIR']
    os.makedirs(path, exist_ok=True)
    return path


def _is_safe_save_name(name: str) -> bool:
    # Allow only simple names like "foo.json", alnum, dash, underscore, dot
    if not isinstance(name, str) or len(name) == 0 or len(name) > 128:
        return False
    return re.fullmatch(r"[A-Za-z0-9_.-]+", name) is not None and name.lower().endswith('.json')


def list_saves() -> list[str]:
    return sorted(
        fn for fn in os.listdir(saves_dir())
        if fn.lower().endswith('.json') and _is_safe_save_name(fn)
    )


def _error(e: MazeError, status: int = 400):
    return jsonify(e.to_dict()), status


def _not_found(message: str):
    return jsonify({'status': 'error', 'kind': None, 'message': message}), 404


def _register(rf: RouteFinder, source: str) -> str:
    rid = str(uuid.uuid4())
    ROUTES[rid] = {
        'id': rid,
        'created_at': datetime.utcnow().isoformat() + 'Z',
        'source': source,
        'finder': rf,
        'outcome': 'solved' if rf.is_finished() else 'progress',
        'message': None,
    }
    return rid


def _state(rid: str) -> dict:
    run = ROUTES[rid]
    rf = run['finder']
    return {
        'status': 'ok',
        'route_id': rid,
        'source': run['source'],
        'outcome': run['outcome'],
        'message': run['message'],
        'snapshot': rf.snapshot().to_dict(),
    }


@app.get('/api/health')
def api_health():
    return jsonify({'status': 'ok', 'active_routes': len(ROUTES)})


@app.post('/api/routes')
def api_route_start():
    body = request.get_json(force=True, silent=True) or {}
    text = body.get('maze')
    if not isinstance(text, str):
        return jsonify({'status': 'error', 'kind': None, 'message': "'maze' must be the maze text"}), 400
    try:
        # every route gets its own maze so tile flags are never shared
        maze = parse_maze(text)
    except MazeError as e:
        return _error(e)
    rid = _register(RouteFinder(maze), 'text')
    logger.info("route %s started on a %dx%d maze", rid, maze.width, maze.height)
    return jsonify(_state(rid)), 201


@app.get('/api/routes/<rid>')
def api_route_state(rid):
    if rid not in ROUTES:
        return _not_found('invalid_route')
    return jsonify(_state(rid))


@app.delete('/api/routes/<rid>')
def api_route_delete(rid):
    run = ROUTES.pop(rid, None)
    if not run:
        return _not_found('invalid_route')
    logger.info("route %s discarded (%s)", rid, run['outcome'])
    return jsonify({'status': 'ok', 'route_id': rid})


@app.post('/api/routes/<rid>/step')
def api_route_step(rid):
    run = ROUTES.get(rid)
    if not run:
        return _not_found('invalid_route')
    rf = run['finder']
    if run['outcome'] == 'failed':
        # nothing left to explore; report the same failure again
        return jsonify(_state(rid))

    res = rf.advance()
    run['outcome'] = res.status
    run['message'] = res.message
    if res.status == 'solved':
        logger.info("route %s solved after %d steps", rid, rf.steps)
    elif res.status == 'failed':
        logger.info("route %s failed: %s", rid, res.message)

    state = _state(rid)
    state['events'] = res.events
    return jsonify(state)


@app.post('/api/routes/<rid>/save')
def api_route_save(rid):
    run = ROUTES.get(rid)
    if not run:
        return _not_found('invalid_route')
    body = request.get_json(force=True, silent=True) or {}
    name = body.get('name') or f'{rid}.json'
    if not _is_safe_save_name(name):
        return jsonify({'status': 'error', 'kind': None, 'message': 'invalid_save_name'}), 400
    try:
        save_route(run['finder'], os.path.join(saves_dir(), name))
    except MazeError as e:
        return _error(e, 500 if e.kind == ErrorKind.STORAGE_UNAVAILABLE else 400)
    logger.info("route %s saved as %s", rid, name)
    return jsonify({'status': 'ok', 'name': name})


@app.post('/api/routes/load')
def api_route_load():
    body = request.get_json(force=True, silent=True) or {}
    name = body.get('name')
    if not _is_safe_save_name(name):
        return jsonify({'status': 'error', 'kind': None, 'message': 'invalid_save_name'}), 400
    path = os.path.join(saves_dir(), name)
    if not os.path.exists(path):
        return _not_found('save_not_found')
    try:
        rf = load_route_file(path)
    except MazeError as e:
        return _error(e)
    rid = _register(rf, name)
    logger.info("route %s restored from %s", rid, name)
    return jsonify(_state(rid)), 201


@app.get('/api/saves')
def api_list_saves():
    return jsonify({'saves': list_saves()})


if __name__ == '__main__':
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(debug=True)
