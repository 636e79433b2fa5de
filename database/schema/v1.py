"""Schema v1 - Initial database schema.

This version includes tables for:
- The DApp catalog and its one-to-one satellites (contract, metrics, rating)
- Per-platform reviews
- Account favorites
- API clients for token issuance

Catalog collections (chains, categories, social_links, tags) are TEXT because
the ingestion side writes them in several encodings; readers normalize them.
"""

schema = {
    'version': 1,
    'tables': [
        {
            'name': 'dapps_main',
            'columns': [
                {'name': 'dapp_id', 'type': 'INT8', 'primary_key': True},
                {'name': 'name', 'type': 'TEXT', 'nullable': False},
                {'name': 'description', 'type': 'TEXT'},
                {'name': 'full_description', 'type': 'TEXT'},
                {'name': 'logo', 'type': 'TEXT'},
                {'name': 'website', 'type': 'TEXT'},
                {'name': 'link', 'type': 'TEXT'},
                {'name': 'chains', 'type': 'TEXT'},
                {'name': 'categories', 'type': 'TEXT'},
                {'name': 'social_links', 'type': 'TEXT'},
                {'name': 'tags', 'type': 'TEXT'}
            ],
            'indexes': [
                {'name': 'idx_dapps_main_name', 'columns': ['name']},
                {'name': 'idx_dapps_main_categories', 'columns': ['categories']},
                {'name': 'idx_dapps_main_chains', 'columns': ['chains']}
            ]
        },
        {
            'name': 'smart_contract_info',
            'columns': [
                {'name': 'dapp_id', 'type': 'INT8', 'primary_key': True},
                {'name': 'smartcontract', 'type': 'TEXT'}
            ],
            'foreign_keys': [
                {'columns': ['dapp_id'], 'references': 'dapps_main(dapp_id)'}
            ]
        },
        {
            'name': 'aggregated_metrics',
            'columns': [
                {'name': 'dapp_id', 'type': 'INT8', 'primary_key': True},
                {'name': 'balance', 'type': 'DECIMAL'},
                {'name': 'transactions', 'type': 'INT8'},
                {'name': 'uaw', 'type': 'INT8'},
                {'name': 'volume', 'type': 'DECIMAL'}
            ],
            'foreign_keys': [
                {'columns': ['dapp_id'], 'references': 'dapps_main(dapp_id)'}
            ]
        },
        {
            'name': 'reviews_make',
            'columns': [
                {'name': 'dapp_id', 'type': 'INT8', 'primary_key': True},
                {'name': 'ratings', 'type': 'DECIMAL'},
                {'name': 'summarized_review', 'type': 'TEXT'}
            ],
            'foreign_keys': [
                {'columns': ['dapp_id'], 'references': 'dapps_main(dapp_id)'}
            ],
            'indexes': [
                {'name': 'idx_reviews_make_ratings', 'columns': ['ratings']}
            ]
        },
        {
            'name': 'top_reviews',
            'columns': [
                {'name': 'dapp_id', 'type': 'INT8'},
                {'name': 'platform', 'type': 'TEXT'},
                {'name': 'review', 'type': 'TEXT'},
                {'name': 'link', 'type': 'TEXT'}
            ],
            'primary_key': ['dapp_id', 'platform'],
            'foreign_keys': [
                {'columns': ['dapp_id'], 'references': 'dapps_main(dapp_id)'}
            ]
        },
        {
            'name': 'userprefs',
            'columns': [
                {'name': 'account_id', 'type': 'TEXT', 'primary_key': True},
                {'name': 'fav_dapp_id', 'type': 'INT8[]', 'nullable': False, 'default': "'{}'"},
                {'name': 'created_at', 'type': 'TIMESTAMP', 'nullable': False, 'default': 'now()'}
            ],
            'indexes': [
                {'name': 'idx_userprefs_fav', 'columns': ['fav_dapp_id'], 'using': 'GIN'}
            ]
        },
        {
            'name': 'api_clients',
            'columns': [
                {'name': 'client_id', 'type': 'TEXT', 'primary_key': True},
                {'name': 'client_secret', 'type': 'TEXT', 'nullable': False},  # bcrypt hash
                {'name': 'is_active', 'type': 'BOOLEAN', 'nullable': False, 'default': 'true'},
                {'name': 'created_at', 'type': 'TIMESTAMP', 'nullable': False, 'default': 'now()'}
            ]
        }
    ]
}
