"""
Development Server Entry Point
==============================

Usage:
    python run.py              # Development mode with reload
    python run.py --no-reload  # Development mode without reload
"""

import argparse


def main():
    """Run the development server."""
    import uvicorn
    from myjellybean.core.config import get_settings

    settings = get_settings()

    # Parse command line arguments
    parser = argparse.ArgumentParser(description="Run the MyJellyBean development server")
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)",
    )
    args = parser.parse_args()

    print(f"\n{'='*50}")
    print(f"  {settings.app_name} v{settings.app_version}")
    print(f"  Provider key: {'configured' if settings.provider_configured else 'MISSING'}")
    print(f"{'='*50}\n")

    print(f"Server: http://{args.host}:{args.port}")
    print("Press CTRL+C to stop\n")

    uvicorn.run(
        "myjellybean.main:app",
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
