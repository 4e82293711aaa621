# evoting/audit/audit_logger.py

import os
import json
import hashlib
import base64
import logging
from datetime import datetime, timezone
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

# Append-only election event log with hash chaining and Ed25519 signatures

logger = logging.getLogger(__name__)

KEY_FILE_NAME = 'audit_signing_key.pem'


class AuditLogger:
    def __init__(self, log_dir='logs', signing_key=None, key_path=None):
        self.log_dir = log_dir
        self.log_file = os.path.join(log_dir, 'audit.log')
        self.key_path = key_path or os.path.join(log_dir, KEY_FILE_NAME)
        self.previous_hash = None

        os.makedirs(log_dir, exist_ok=True)

        self.signing_key = signing_key or self._load_or_create_key()
        self._load_previous_hash()

    def _load_or_create_key(self):
        """Reuse the PEM key at ``key_path`` so entries stay verifiable across restarts."""
        if os.path.exists(self.key_path):
            with open(self.key_path, 'rb') as f:
                return serialization.load_pem_private_key(f.read(), password=None)

        key = Ed25519PrivateKey.generate()
        pem = key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption())
        key_dir = os.path.dirname(self.key_path)
        if key_dir:
            os.makedirs(key_dir, exist_ok=True)
        with open(self.key_path, 'wb') as f:
            f.write(pem)
        os.chmod(self.key_path, 0o600)
        logger.info("Created audit signing key at %s", self.key_path)
        return key

    def _load_previous_hash(self):
        if os.path.exists(self.log_file):
            with open(self.log_file, 'r') as f:
                lines = f.readlines()
                if lines:
                    try:
                        last_entry = json.loads(lines[-1])
                        self.previous_hash = last_entry.get('hash')
                    except json.JSONDecodeError:
                        self.previous_hash = None

    def log_event(self, event_type, data, election_id=None):
        """Append one signed entry. Failures are logged, never raised into the caller."""
        try:
            log_entry = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "event_type": event_type,
                "data": data,
                "election_id": election_id,
                "previous_hash": self.previous_hash,
            }
            entry_json = json.dumps(log_entry, sort_keys=True, default=str)
            entry_hash = hashlib.sha256(entry_json.encode()).hexdigest()

            signature = self.signing_key.sign(entry_json.encode())
            log_entry['hash'] = entry_hash
            log_entry['signature'] = base64.b64encode(signature).decode()

            with open(self.log_file, 'a') as f:
                f.write(json.dumps(log_entry, default=str) + "\n")

            self.previous_hash = entry_hash
        except Exception as e:
            logger.error("Audit log error: %s", e)

    def read_entries(self):
        if not os.path.exists(self.log_file):
            return []
        with open(self.log_file, 'r') as f:
            return [json.loads(line) for line in f if line.strip()]

    def verify_log_integrity(self):
        """Check the hash chain and every signature against this logger's key."""
        try:
            previous_hash = None
            public_key = self.signing_key.public_key()
            for log_entry in self.read_entries():
                if log_entry.get('previous_hash') != previous_hash:
                    return False
                entry_copy = dict(log_entry)
                signature = base64.b64decode(entry_copy.pop('signature'))
                entry_hash = entry_copy.pop('hash')
                entry_json = json.dumps(entry_copy, sort_keys=True, default=str).encode()
                if hashlib.sha256(entry_json).hexdigest() != entry_hash:
                    return False
                public_key.verify(signature, entry_json)
                previous_hash = entry_hash
            return True
        except Exception:
            return False
