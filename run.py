import uvicorn
from ovpn_mgmt.config import config_path
from ovpn_mgmt.logging_utility import logger


if __name__ == '__main__':
    logger.info(f"Starting OpenVPN management API (config: {config_path()})")
    uvicorn.run("ovpn_mgmt.main:app", host="127.0.0.1", port=8000)
