import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///flagstats.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Row key of the persisted tracker document
    STORE_KEY = os.environ.get('STORE_KEY', 'flag_5v5_stat_tracker_v1')
    # Rule set for new games when the client does not send one
    DEFAULT_RULE_SET = os.environ.get('DEFAULT_RULE_SET', 'NFL_FLAG')
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
        ).split(',') if o.strip()
    ]
    EXPORT_FILENAME = os.environ.get('EXPORT_FILENAME', 'flag5v5-stats.json')
