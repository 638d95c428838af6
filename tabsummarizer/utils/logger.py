import os
import sys
import logging

logging_str = "[%(asctime)s] {%(pathname)s:%(lineno)d} %(levelname)s - %(message)s"
logging_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), "logs")
loging_path = os.path.join(logging_dir, "tabsummarizer.log")
if not os.path.exists(logging_dir):
    os.makedirs(logging_dir)
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format=logging_str,
    handlers=[
        logging.FileHandler(loging_path),
        logging.StreamHandler(sys.stdout)
    ]
)

logging = logging.getLogger('tabsummarizer')
