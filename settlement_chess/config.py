import os

WORLD_WIDTH = int(os.getenv("WORLD_WIDTH", "20"))
WORLD_HEIGHT = int(os.getenv("WORLD_HEIGHT", "20"))
NODE_COUNT = int(os.getenv("NODE_COUNT", "15"))
TERRITORY_TO_WIN = int(os.getenv("TERRITORY_TO_WIN", "64"))
DEPLOY_REVEAL_RADIUS = 2

ADVISOR_TIMEOUT = float(os.getenv("ADVISOR_TIMEOUT", "6"))
ADVISOR_DEPTH = int(os.getenv("ADVISOR_DEPTH", "15"))
AI_USER_AGENT = os.getenv("AI_USER_AGENT", "SettlementChess/0.1 (+contact: you@example.com)")

REDIS_URL = os.getenv("REDIS_URL")
LOG_LIMIT = int(os.getenv("LOG_LIMIT", "1000"))
