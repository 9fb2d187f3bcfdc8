"""Allows: python -m batchsearch"""
from batchsearch.app import create_app
from batchsearch.config import Config


def main():
    cfg = Config()
    cfg.validate()   # missing RAPIDAPI_KEY stops the process here

    app = create_app(cfg)

    print(f"\n  🔎  Batch Search Server")
    print(f"  URL    → http://{cfg.HOST}:{cfg.PORT}")
    print(f"  Output → {cfg.OUTPUT_DIR}\n")

    app.run(
        host=cfg.HOST,
        port=cfg.PORT,
        debug=cfg.DEBUG,
        threaded=True,
    )


if __name__ == "__main__":
    main()
