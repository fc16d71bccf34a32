import sys
import json
import asyncio
import logging
import argparse

from spirit_shorts import config
from spirit_shorts.services.generation import process_video

# Configurar logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format=config.LOG_FORMAT,
    handlers=[
        logging.StreamHandler(sys.stderr)
    ]
)

logger = logging.getLogger("process_video")

def run(url: str, save: bool = True, output: str = None) -> int:
    """Procesa un video una vez y escribe el resultado como JSON."""
    try:
        result = asyncio.run(process_video(url, save=save))
    except KeyboardInterrupt:
        logger.info("Procesamiento detenido por usuario")
        return 130
    except Exception as e:
        logger.error(f"Error procesando {url}: {str(e)}")
        return 1

    serialized = json.dumps(result, ensure_ascii=False, indent=2)
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(serialized)
        logger.info(f"Resultado guardado en {output}")
    else:
        print(serialized)
    return 0

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Genera el contenido de un video de YouTube desde la terminal")
    parser.add_argument("url", help="URL del video de YouTube")
    parser.add_argument(
        "--no-save",
        action="store_true",
        help="No guardar el resultado en el historial"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Archivo donde escribir el JSON (por defecto, salida estándar)"
    )

    args = parser.parse_args()
    sys.exit(run(args.url, save=not args.no_save, output=args.output))
