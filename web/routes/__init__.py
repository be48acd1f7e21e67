"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- properties: 잔고 이벤트 저장/조회, 월간 리포트
"""
