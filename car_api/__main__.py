import argparse

import uvicorn

from car_api.core import environment
from car_api.core.logging import setup_logging
from car_api.main import create_app


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="car_api", description="Car records HTTP API")
    parser.add_argument("-c", dest="clear_db", action="store_true",
                        help="clear database data on app start; overrides -r")
    parser.add_argument("-r", dest="reset_db", action="store_true",
                        help="reset database to default data on app start; is overridden by -c")
    parser.add_argument("-m", dest="enable_metrics", action="store_true",
                        help="expose Prometheus metrics on /metrics")
    parser.add_argument("--host", default=environment.get_host())
    parser.add_argument("--port", type=int, default=environment.get_port())
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging()
    app = create_app(
        enable_metrics=args.enable_metrics or None,
        reset_db=args.reset_db or None,
        clear_db=args.clear_db or None,
    )
    uvicorn.run(app, host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
