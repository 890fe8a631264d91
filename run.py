#!/usr/bin/env python3
import os
import urllib.parse
from dotenv import load_dotenv

# Carrega o .env antes de importar a config (que lê os.environ na importação)
load_dotenv()

from vmforge import create_app
from vmforge.config import DevelopmentConfig

app = create_app(DevelopmentConfig)


def list_routes():
    output = []
    for rule in app.url_map.iter_rules():
        methods = ','.join(sorted(rule.methods - {'HEAD', 'OPTIONS'}))
        line = urllib.parse.unquote(f"{rule.endpoint:40s} {methods:20s} {rule}")
        output.append(line)

    print("\nVMForge Backend Rodando!")
    print("===========================")
    print("Rotas Ativas:")
    for line in sorted(output):
        print(line)
    print("===========================\n")


if __name__ == '__main__':
    # Em modo debug, o reloader pode duplicar o print
    if os.environ.get("WERKZEUG_RUN_MAIN") == "true":
        list_routes()
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 5000)))
