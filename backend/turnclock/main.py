from flask import Blueprint, jsonify
from turnclock import get_engine

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the turn clock server!'})


@main.route('/healthz')
def healthz():
    return jsonify({'status': 'ok'})


@main.route('/api/state')
def get_state():
    """Current phase, active player and ordered roster."""
    return jsonify(get_engine().status())
