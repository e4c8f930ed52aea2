import uvicorn

from imgproxy_bridge.vars import HOST, PORT


def main():
    uvicorn.run("imgproxy_bridge.server:app", host=HOST, port=PORT)


if __name__ == "__main__":
    main()
