import uvicorn
import argparse
from tictactoe.main import settings

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description='Run the Tic Tac Toe API server')
    parser.add_argument('--host', default=settings.host, help='Interface to bind to')
    parser.add_argument('--port', type=int, default=settings.port, help='Port to run the server on')
    parser.add_argument('--reload', action='store_true', help='Reload on code changes')
    args = parser.parse_args()

    uvicorn.run("tictactoe.main:app", host=args.host, port=args.port, reload=args.reload)
