import logging
import socket
import sys
import webbrowser
from threading import Timer

from school_directory import create_app

# WSGI entry point for gunicorn, waitress and friends
app = create_app()

logger = logging.getLogger('school_directory.launcher')


def choose_port(preferred: int, host: str = '127.0.0.1') -> int:
    """Return `preferred` when it can be bound, otherwise a port picked by the OS."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, preferred))
        except OSError:
            logger.warning(f"Port {preferred} is in use, picking a free one")
            sock.bind((host, 0))
        return sock.getsockname()[1]


def open_browser(url: str, delay: float = 2.0, timer_factory=Timer):
    """Open `url` in a browser once the dev server has had time to start.

    Returns the started timer so callers can cancel it.
    """
    def launch():
        try:
            webbrowser.open(url)
        except webbrowser.Error as e:
            logger.warning(f"Could not open a browser, visit {url} manually: {str(e)}")

    timer = timer_factory(delay, launch)
    timer.daemon = True
    timer.start()
    return timer


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    preferred = int(argv[0]) if argv else app.config['DEV_SERVER_PORT']
    port = choose_port(preferred)
    url = f"http://localhost:{port}"

    print(f"School Directory running at {url}")
    print(f"School API: {app.config['SCHOOLS_API_URL']}")
    print("Press Ctrl+C to stop the server")

    if app.config['OPEN_BROWSER']:
        open_browser(url)

    app.run(host='0.0.0.0', port=port, debug=True, use_reloader=False)
    return 0


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nSchool Directory stopped")
        sys.exit(0)
