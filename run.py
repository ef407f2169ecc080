import logging

from secretboard import create_app

logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')

app = create_app()

if __name__ == '__main__':
    app.run(port=app.config['PORT'])
