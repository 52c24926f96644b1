from devicepay import create_app

app = create_app()

if __name__ == "__main__":
    # Single-threaded: the ledger is one in-memory state per process
    app.run(port=5001, threaded=False)
