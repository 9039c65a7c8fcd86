# nexus/utils/json_provider.py
import numpy as np
import pandas as pd
from datetime import date, datetime
from flask.json.provider import JSONProvider
import json
import logging
import enum

logger = logging.getLogger(__name__)

class NumpyJSONProvider(JSONProvider):
    """
    JSONProvider que entende escalares NumPy/Pandas, datas e Enums.

    NaN vira null; Enums são serializados pelo valor ('CRITICAL', 'Férias').
    """
    def default(self, o):
        if isinstance(o, np.integer):
            return int(o)
        elif isinstance(o, np.floating):
            return None if np.isnan(o) else float(o)
        elif isinstance(o, np.bool_):
            return bool(o)
        elif isinstance(o, np.ndarray):
            return o.tolist()
        elif isinstance(o, (datetime, date, pd.Timestamp)):
            return None if pd.isna(o) else o.isoformat()
        elif isinstance(o, enum.Enum):
            return o.value
        elif isinstance(o, (pd.Series, pd.Index)):
            return o.tolist()
        elif isinstance(o, pd.DataFrame):
            return o.to_dict(orient='records')
        elif pd.api.types.is_scalar(o) and pd.isna(o):
            return None

        logger.error(f"Tipo não serializável: {type(o).__name__}")
        raise TypeError(f"Objeto do tipo {type(o).__name__} não é serializável em JSON")

    def dumps(self, obj, **kwargs):
        kwargs['default'] = self.default
        kwargs.setdefault('ensure_ascii', False)
        kwargs.setdefault('sort_keys', False)  # Preserva a ordem das agregações

        try:
            return json.dumps(obj, **kwargs)
        except TypeError as e:
            logger.error(f"Erro de serialização JSON: {e}. Objeto raiz (tipo): {type(obj)}", exc_info=True)
            raise

    def loads(self, s, **kwargs):
        return json.loads(s, **kwargs)
