from flagstats import db
import time

class StoreDocument(db.Model):
    """The whole tracker as one JSON document, keyed like a local-storage slot."""
    __tablename__ = 'store_document'
    key = db.Column(db.String(64), primary_key=True)
    document = db.Column(db.Text, nullable=False)  # JSON-encoded tracker document
    updated_at = db.Column(db.Float, nullable=False, default=time.time)
