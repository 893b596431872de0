import os

# Provide minimal required env vars so Settings() doesn't fail in tests
os.environ.setdefault('JWT_SECRET', 'test-jwt-secret')
os.environ.setdefault('DATABASE_URL', 'sqlite+aiosqlite:///:memory:')
os.environ.setdefault('APP_ENV', 'test')
