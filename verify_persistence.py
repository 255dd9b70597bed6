import time
import subprocess
import httpx
import sys
import os
import signal
import uuid

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/api"

def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for i in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!", resp.json().get("database"))
                return True
        except httpx.ConnectError:
            pass
        except Exception as e:
            print(f"Connect error: {e}")
        time.sleep(delay)
    print("❌ Server failed to start.")
    return False

def start_server(extra_env=None):
    return subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "backend.app.main:app", "--host", "127.0.0.1", "--port", "8000"],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env={**os.environ, **(extra_env or {})}
    )

def stop_server(proc):
    proc.send_signal(signal.SIGTERM)
    proc.wait()

def run_verification():
    code = f"VERIFY-{uuid.uuid4().hex[:6]}"

    # 1. Start Server (First Run)
    print("\n--- [Step 1] Starting Server (Initial) ---")
    proc = start_server({"DB_ECHO": "True"})  # Enable echo to see SQL

    try:
        if not wait_for_server():
            server_logs = proc.communicate(timeout=2)
            print("Server Stdout:", server_logs[0].decode())
            print("Server Stderr:", server_logs[1].decode())
            raise Exception("Server start failed")

        # 2. Create Customer
        print("\n--- [Step 2] Creating Customer (Persistence Test) ---")
        resp = httpx.post(f"{BASE_URL}{API_PREFIX}/clientes", json={"nome": "Persistencia Teste", "codigo": code})

        if resp.status_code == 201:
            print("✅ Customer Created Successfully")
            print(resp.json())
        else:
            print(f"❌ Creation Failed: {resp.status_code} {resp.text}")
            raise Exception("Customer creation failed")

    finally:
        print("\n--- [Step 3] Stopping Server ---")
        stop_server(proc)

    time.sleep(2) # Wait for port release

    # 3. Restart Server
    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc2 = start_server()

    try:
        if not wait_for_server():
            raise Exception("Server restart failed")

        # 4. Read back
        print("\n--- [Step 5] Listing Customers (Post-Restart) ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/clientes")
        codes = [c["codigo"] for c in resp.json()] if resp.status_code == 200 else []

        if code in codes:
            print(f"✅ Customer {code} Persisted!")
        else:
            print(f"❌ Customer {code} missing after restart: {resp.status_code} {resp.text}")
            raise Exception("Customer not persisted")

        # 5. Config singleton
        print("\n--- [Step 6] Verifying Config Singleton ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/config")
        if resp.status_code == 200:
            print("✅ Config", resp.json())
        else:
            print(f"❌ Config Check Failed: {resp.status_code}")

    finally:
        print("\n--- [Step 7] Stopping Server ---")
        stop_server(proc2)

if __name__ == "__main__":
    run_verification()
