import os
import sys

# Vercel runs this file directly; make the project root importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config_prod import ProductionConfig
from taskboard import create_app

app = create_app(ProductionConfig)

if __name__ == '__main__':
    app.run(debug=os.environ.get('FLASK_DEBUG') == '1')
