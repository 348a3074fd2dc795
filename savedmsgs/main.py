"""Entry: sign in to Telegram and start the API server."""
import uvicorn

from savedmsgs.config import API_HOST, API_PORT

if __name__ == "__main__":
    # Logging is configured when savedmsgs.api.app is imported.
    # No reload: the first run prompts for the Telegram login on this terminal.
    uvicorn.run("savedmsgs.api.app:app", host=API_HOST, port=API_PORT)
