from flask import Blueprint, jsonify
from flagstats.services.stats.rules import DEFAULT_RULE_SET, ruleset_catalog

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Flag football stat tracker', 'status': 'ok'})

@main.route('/health')
def health():
    return jsonify({'status': 'healthy'})

@main.route('/api/rulesets')
def list_rulesets():
    return jsonify({'default': DEFAULT_RULE_SET.value, 'rulesets': ruleset_catalog()})
