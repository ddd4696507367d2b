import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma-separated list of frontend origins allowed to open the socket
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
        ).split(',') if o.strip()
    ]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3002'))
    # 'background' runs one Socket.IO background task per playing room;
    # 'manual' leaves ticking to the caller (tests, simulate-match)
    TICK_SCHEDULER = os.environ.get('TICK_SCHEDULER', 'background')
    # Optional: fixed seed for ball directions. Unset means OS entropy.
    BALL_SEED = int(os.environ['BALL_SEED']) if os.environ.get('BALL_SEED') else None

    # Game constants (fixed for the lifetime of the process)
    CANVAS_WIDTH = int(os.environ.get('CANVAS_WIDTH', '800'))
    CANVAS_HEIGHT = int(os.environ.get('CANVAS_HEIGHT', '400'))
    PADDLE_WIDTH = int(os.environ.get('PADDLE_WIDTH', '10'))
    PADDLE_HEIGHT = int(os.environ.get('PADDLE_HEIGHT', '80'))
    PADDLE_OFFSET = int(os.environ.get('PADDLE_OFFSET', '20'))
    BALL_RADIUS = int(os.environ.get('BALL_RADIUS', '8'))
    BALL_SPEED = int(os.environ.get('BALL_SPEED', '5'))
    PADDLE_SPEED = int(os.environ.get('PADDLE_SPEED', '6'))
    WINNING_SCORE = int(os.environ.get('WINNING_SCORE', '5'))
    FRAME_RATE = int(os.environ.get('FRAME_RATE', '60'))
