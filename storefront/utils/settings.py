# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))

# czasy przejsc statusow zamowienia, wspolne dla wszystkich zamowien
ORDER_PROCESSING_SECONDS = float(os.getenv("ORDER_PROCESSING_SECONDS", 10))
ORDER_SHIPPED_SECONDS = float(os.getenv("ORDER_SHIPPED_SECONDS", 10))
