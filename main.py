from casestatus.main import app
import os

if __name__ == "__main__":
    # Each request drives its own browser, so the threaded server keeps
    # concurrent lookups from waiting on each other.
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, threaded=True)
