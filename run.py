import os

from dotenv import load_dotenv

load_dotenv()

from itts_community import create_app  # noqa: E402

app = create_app(os.getenv("APP_ENV", "development"))


if __name__ == "__main__":
    app.run(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        debug=app.config.get("DEBUG", False),
    )
