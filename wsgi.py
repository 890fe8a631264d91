from dotenv import load_dotenv

load_dotenv()

from vmforge import create_app
from vmforge.config import ProductionConfig

app = create_app(ProductionConfig)

if __name__ == '__main__':
    app.run()
