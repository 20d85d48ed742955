import asyncio
import sys
import os

# Aggiungi backend/ alla PYTHONPATH per importare crm.*
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "backend"))

from crm.core.database import engine
from crm.models import Base

async def reset():
    print("Connessione al database, eliminazione archivio documenti...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        print("Tabella documenti eliminata. Creazione nuova tabella...")
        await conn.run_sync(Base.metadata.create_all)
    print("Archivio resettato con successo!")

if __name__ == "__main__":
    asyncio.run(reset())
