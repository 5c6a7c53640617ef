import argparse
import subprocess
import sys
import time
import webbrowser
import requests

parser = argparse.ArgumentParser(description="Run the affinity cloud API locally.")
parser.add_argument("--host", default="127.0.0.1")
parser.add_argument("--port", type=int, default=8000)
parser.add_argument("--no-browser", action="store_true", help="don't open the API docs")
args = parser.parse_args()

base_url = f"http://{args.host}:{args.port}"
server_process = subprocess.Popen([
    sys.executable, '-m', 'uvicorn', 'affinities.server:app', '--reload',
    '--host', args.host, '--port', str(args.port),
])

status_code = 0
while status_code != 200 and server_process.poll() is None:
    try:
        status_code = requests.get(f"{base_url}/api/health", timeout=2).status_code
    except requests.exceptions.ConnectionError:
        pass
    time.sleep(1)

if not args.no_browser and server_process.poll() is None:
    webbrowser.open(f"{base_url}/docs")

try:
    print(f"Serving on {base_url}. Press Ctrl+C to stop the server and exit...")
    while server_process.poll() is None:
        time.sleep(1)
except KeyboardInterrupt:
    print("\nCtrl+C detected. Exiting...")
finally:
    server_process.terminate()
    server_process.wait()
